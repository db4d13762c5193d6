"""Stock Tracker - tracked stocks with an offline cache for unreliable data sources."""
