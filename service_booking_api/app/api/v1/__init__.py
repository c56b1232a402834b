"""Version 1 of the Service Booking API."""
