"""
Services.

Business logic layer. Import concrete services from their modules;
this package stays import-light because the settings module depends on
the referral program config.
"""
