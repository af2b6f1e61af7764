"""
Reset NanApp by deleting the local database and, optionally, the settings.
This removes every feeding, breastfeeding and sleep log for all babies.
"""

import os
from BackEnd.core.paths import db_path, settings_path

def reset_all_logs():
    """Delete the database file to remove all logs."""
    db_file = db_path()

    if db_file.exists():
        print(f"Found database at: {db_file}")

        confirm = input("Are you sure you want to delete all logs? This cannot be undone. (yes/no): ")

        if confirm.lower() in ['yes', 'y']:
            try:
                os.remove(db_file)
                print("Database deleted.")
                print("Next time you open the app, a fresh database will be created.")
            except OSError as e:
                print(f"Error deleting database: {e}")
        else:
            print("Reset cancelled.")
    else:
        print("No database found. There are no logs to delete.")

    settings_file = settings_path()
    if settings_file.exists():
        confirm_settings = input("\nAlso delete your settings (active baby, language)? (yes/no): ")
        if confirm_settings.lower() in ['yes', 'y']:
            try:
                os.remove(settings_file)
                print("Settings deleted.")
            except OSError as e:
                print(f"Error deleting settings: {e}")

if __name__ == "__main__":
    print("=" * 50)
    print("NanApp - Delete All Logs")
    print("=" * 50)
    reset_all_logs()
    print("\nPress Enter to exit...")
    input()
