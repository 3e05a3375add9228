"""
Red-Light Router
Driving routes around Raleigh, scored against simulated traffic lights.

Run with: streamlit run app.py
"""

import logging

from signal_router.ui import main

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

main()
