#!/usr/bin/env python3
"""
Main entry point for the Matchday rotation manager web application.

This script configures logging and launches the Flask-based web server.
Settings come from MATCHDAY_* environment variables (see matchday.utils.config).
"""
import logging

from matchday.ui.web_app import run_web_app
from matchday.utils import AppConfig

if __name__ == "__main__":
    config = AppConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run_web_app(config)
