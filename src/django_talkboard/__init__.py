"""Room display kiosk that follows a Pretalx schedule export."""
