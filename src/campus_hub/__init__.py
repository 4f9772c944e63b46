"""Campus Hub: university social network backend."""
