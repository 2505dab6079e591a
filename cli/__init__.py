"""runlens command line interface"""
