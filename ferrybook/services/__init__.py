"""
Business services for the booking engine
"""
