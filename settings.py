import os
from dotenv import load_dotenv

# Load environment variables from .env file
# This should be called at the very beginning of your application
load_dotenv()

class Settings:
    """
    Manages secstore settings loaded from environment variables.
    Command line flags take precedence over these values.
    """
    # Key Rings
    SECRING_PATH: str = os.getenv('SECRING_PATH', '~/.gnupg/secring.gpg')
    PUBRING_PATH: str = os.getenv('PUBRING_PATH', '~/.gnupg/pubring.gpg')

    # Passphrase prompt. SECSTORE_PASSPHRASE skips the prompt for batch runs.
    PROMPT: str = os.getenv('SECSTORE_PROMPT', 'password: ')
    PASSPHRASE: str = os.getenv('SECSTORE_PASSPHRASE')

    # Directory Layout
    ENCRYPTED_SUFFIX: str = os.getenv('ENCRYPTED_SUFFIX', '.gpg')
    PLAINTEXT_SUFFIX: str = os.getenv('PLAINTEXT_SUFFIX', '.txt')
    FILES_DIRECTORY: str = os.getenv('FILES_DIRECTORY', 'files')
    ACCESS_LIST_NAME: str = os.getenv('ACCESS_LIST_NAME', 'access-list.conf')

# Instantiate settings to be imported by other modules
settings = Settings()

if __name__ == "__main__":
    # This block is for testing/debugging the settings loading
    print("--- Loaded Settings ---")
    for attr in dir(settings):
        if attr == 'PASSPHRASE':
            continue
        if not attr.startswith('__') and not callable(getattr(settings, attr)):
            print(f"{attr}: {getattr(settings, attr)}")
    print("-----------------------")
