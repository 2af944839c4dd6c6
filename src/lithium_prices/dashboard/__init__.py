"""FastAPI dashboard serving derived lithium prices."""
