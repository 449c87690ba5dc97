"""Passwall Installer — interactive Passwall setup for OpenWrt routers."""

__version__ = "0.1.0"
