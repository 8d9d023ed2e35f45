"""Navigator PBE Meta information.
   Navigator PBE encrypts secrets with a key derived from a passphrase.
"""
__title__ = 'navigator_pbe'
__description__ = (
   'Navigator PBE encrypts configuration secrets and values '
   'with a key derived from a passphrase (PBKDF2-HMAC).'
)
__version__ = '0.3.0'
__copyright__ = 'Copyright (c) 2023 Jesus Lara'
__author__ = 'Jesus Lara'
__author_email__ = 'jesuslarag@gmail.com'
__license__ = 'Apache-2.0'
__url__ = 'https://github.com/phenobarbital/navigator-pbe'
