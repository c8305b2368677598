"""
Controllers connecting widgets to the reading session.
"""
from .input_handler import UserInputHandler
from .reader_controller import ReaderController, ReaderSession

__all__ = ['ReaderController', 'ReaderSession', 'UserInputHandler']
