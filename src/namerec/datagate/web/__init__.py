"""FastAPI surface for DataGate."""
