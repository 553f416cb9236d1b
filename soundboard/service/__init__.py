"""Use-cases that sit between the HTTP layer and the stores."""
