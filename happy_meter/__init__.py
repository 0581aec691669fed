"""Happy Meter: employee sentiment check-ins, dashboard stats and weekly reports."""
