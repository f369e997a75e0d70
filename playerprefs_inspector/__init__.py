"""PlayerPrefs Inspector.

Reads the key/value preferences a game runtime persists in its platform-native
store (Windows registry, macOS property list, flat binary file) into a uniform,
typed model, and keeps a separately persisted registry of user-created entries.
"""

__version__ = "0.1.0"
