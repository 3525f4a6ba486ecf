# tests/conftest.py

import os

# must be set before rayfield.viz.plot2d is imported
os.environ.setdefault("RAYFIELD_MPL_BACKEND", "Agg")
