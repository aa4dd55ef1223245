"""
Command line tools for eventgraph.
"""
