"""Domain resources for repositories, pull requests, and articles."""
