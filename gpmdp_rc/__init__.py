"""gpmdp_rc - command line remote control for GPMDP over its websocket API."""

__version__ = "0.1.0"
