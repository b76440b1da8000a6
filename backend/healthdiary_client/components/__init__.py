"""
Health Diary Client — Dashboard Components
===========================================

    calendar      → month grid; day clicks publish entries:list / date:selected
    chart         → weight / sleep / mood line for the calendar's month
    entries_list  → modal listing one day's entries, with delete

Components never call each other. They are built per dashboard mount with
the EventBus (and EntryService where they fetch or mutate) injected, and
re-render purely from the payloads they receive.
"""
