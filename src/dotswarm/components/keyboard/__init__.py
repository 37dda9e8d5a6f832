from .stdin_keyboard_adapter import StdinKeyboardAdapter, decode_char
from .dummy_keyboard_adapter import DummyKeyboardAdapter
from .keyboard_input_adapter import KeyboardInputAdapter

__all__ = ['KeyboardInputAdapter', 'StdinKeyboardAdapter', 'DummyKeyboardAdapter', 'decode_char']
