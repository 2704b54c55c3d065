"""Window algorithm, error model and shared bookkeeping."""
