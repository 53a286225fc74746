"""mljboard - scrobble counts across Maloja, HOS relay and Last.fm backends."""

__version__ = "0.3.0"
