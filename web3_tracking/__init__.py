"""Headless-browser inspection of web3 dapps for tracking SDKs, fingerprinting and wallet access."""

__version__ = "0.1.0"
