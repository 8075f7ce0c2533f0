"""Adapters converting UI framework key events into key inputs."""
