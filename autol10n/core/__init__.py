"""Localization pipeline core components."""
