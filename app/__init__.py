"""HTTP applications"""
