"""Shared plumbing for the cargo-wix command line tool."""
