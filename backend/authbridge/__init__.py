"""
Discord to Cognito authentication bridge.
"""
