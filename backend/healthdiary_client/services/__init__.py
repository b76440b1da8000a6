"""
Health Diary Client — Services Package

    entry_service → cached access to /entries with in-flight de-duplication
"""
