from shield_sleep.core.services.sleep_service import SleepService

__all__ = ['SleepService']
