from .transition_controller import TransitionController

__all__ = ['TransitionController']
