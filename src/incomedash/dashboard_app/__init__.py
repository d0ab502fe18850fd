"""Standalone NiceGUI application for the income dashboard."""
