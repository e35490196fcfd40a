"""
Safe Stride Backend — FastAPI
Modular entry point. All logic is split across:
  config.py, models.py, sample_data.py, crime_lookup.py, route_synth.py,
  scoring.py, data_fetchers.py, routes.py, cache.py
"""

import logging

logging.basicConfig(level=logging.INFO)

# Import the FastAPI app from routes
from routes import app  # noqa: F401

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
