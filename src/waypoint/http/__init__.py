"""HTTP value types: requests, request contexts, responses."""
