"""Reduced Google matrix engine: PageRank deflation and restricted resolvent matrices."""
