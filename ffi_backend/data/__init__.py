"""Static data: the default RCM decision diagram and asset catalogue."""
