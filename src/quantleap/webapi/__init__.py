"""HTTP API for the Quant Leap monitor."""
