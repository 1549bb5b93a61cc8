"""avatarcast — drive a remote avatar-video render into a host document."""

__version__ = "0.1.0"
