"""Events BFF — response schemas package."""
