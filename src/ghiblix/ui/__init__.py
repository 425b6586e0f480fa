"""Gradio user interface: page state, handlers, components and the comparison slider."""
