"""Transport-free records shared by the orchestration layer and tests."""
