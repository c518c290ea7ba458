"""Git backend for the squash tool."""
