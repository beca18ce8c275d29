"""Dataset synthesis and the learned aiming model."""
