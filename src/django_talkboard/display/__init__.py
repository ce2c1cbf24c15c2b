"""Rendering, overview rotation and live labels for the kiosk display."""
