"""
Health Diary Client — Utilities Package

    date_utils → ISO date normalization, display formatting, month math
"""
