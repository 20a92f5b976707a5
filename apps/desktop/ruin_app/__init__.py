"""Command line app for the ruin battery wallpaper daemon."""
