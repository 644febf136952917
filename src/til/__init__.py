"""Today I Learned: browse, share and vote on short facts."""

__version__ = "0.1.0"
