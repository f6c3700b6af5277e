"""Source language front ends."""
