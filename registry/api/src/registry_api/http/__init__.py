"""HTTP helpers shared by the registry routers."""
