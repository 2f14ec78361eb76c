"""Line-based token scanning for AI scripts."""
