"""lyrplay - terminal music player with synchronized lyrics"""

VERSION = "1.0.0"
