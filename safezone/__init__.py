"""SafeZone - geo-proximity notifications for community incident reports."""
