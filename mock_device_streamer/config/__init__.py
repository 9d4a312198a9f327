from mock_device_streamer.config.protocol_config import ProtocolConfig
from mock_device_streamer.config.server_config import ServerConfig

__all__ = ["ProtocolConfig", "ServerConfig"]
