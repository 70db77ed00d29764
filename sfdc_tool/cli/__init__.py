"""Command line interface for sfdc-tool"""
