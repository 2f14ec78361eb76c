
class AiScriptError(Exception):
    """ Base class for all aiscript errors"""
    pass

class DefinitionsError(AiScriptError):
    """ Raised when the rule definitions document is malformed"""

class ConfigError(AiScriptError):
    """ Raised when a configuration value from the environment cannot be used"""
