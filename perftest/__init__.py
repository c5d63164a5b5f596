"""
CDN vs. S3 media download performance test.
"""
