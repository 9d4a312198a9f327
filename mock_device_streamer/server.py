"""
Mock Device Streamer Service - TCP Streaming Server

Simulates the camera device: one TCP client at a time receives raw RGB565
video frames interleaved with centroid, pressure, GPS and battery messages.

Usage:
    python -m mock_device_streamer.server
    python -m mock_device_streamer.server --port 8888 --fps 5 --garbage 16
"""

import argparse
import os
import socket
import threading
import time

from mock_device_streamer.config import ServerConfig
from mock_device_streamer.utils.frame_generator import block_center, generate_frame
from mock_device_streamer.utils.protocol_encoder import (
    pack_battery,
    pack_centroid,
    pack_gps,
    pack_pressure,
    pack_video,
)


class DeviceSimulator:
    """Slowly varying telemetry for one simulated flight."""

    def __init__(self):
        self.pressure = 1013.25
        self.voltage = 4.2
        self.latitude = 32.0853
        self.longitude = 34.7818

    def step(self):
        self.pressure -= 0.05  # Climbing
        self.voltage = max(3.2, self.voltage - 0.001)
        self.latitude += 0.00001
        self.longitude += 0.00002

    def telemetry_packets(self, frame_num):
        x, y = block_center(frame_num)
        return [
            pack_centroid(x, y),
            pack_pressure(self.pressure),
            pack_gps(self.latitude, self.longitude),
            pack_battery(self.voltage),
        ]


def stream_to_client(client_sock, fps, garbage_bytes, stop_event):
    """
    Stream until the client disconnects or the server stops.

    Returns:
        int: Number of video frames sent
    """
    simulator = DeviceSimulator()
    frame_interval = 1.0 / fps
    telemetry_every = max(1, int(round(fps / ServerConfig.TELEMETRY_RATE)))

    frames_sent = 0
    total_bytes = 0

    while not stop_event.is_set():
        frame_start_time = time.time()

        packets = [pack_video(generate_frame(frames_sent))]
        if frames_sent % telemetry_every == 0:
            simulator.step()
            packets.extend(simulator.telemetry_packets(frames_sent))

        for packet in packets:
            if garbage_bytes:
                # Noise between frames exercises receiver resynchronization
                packet = os.urandom(garbage_bytes) + packet
            try:
                client_sock.sendall(packet)
            except (ConnectionError, BrokenPipeError, OSError):
                print(f"[DEVICE] Client disconnected after {frames_sent} frames")
                return frames_sent
            total_bytes += len(packet)

        frames_sent += 1

        if frames_sent % ServerConfig.PROGRESS_LOG_INTERVAL == 0:
            print(f"[DEVICE] Frame {frames_sent:05d}, {total_bytes / 1024 / 1024:.1f} MB sent")

        # Maintain the configured FPS
        elapsed = time.time() - frame_start_time
        sleep_time = max(0, frame_interval - elapsed)
        if sleep_time > 0:
            stop_event.wait(sleep_time)

    return frames_sent


def serve(host, port, fps, garbage_bytes, stop_event):
    server_sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server_sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    server_sock.bind((host, port))
    server_sock.listen(1)
    server_sock.settimeout(0.5)  # Poll stop_event between accepts

    print(f"[DEVICE] Listening on {host}:{port}")

    try:
        while not stop_event.is_set():
            try:
                client_sock, addr = server_sock.accept()
            except socket.timeout:
                continue

            print(f"[DEVICE] Client connected from {addr[0]}:{addr[1]}")
            client_sock.setblocking(True)
            try:
                stream_to_client(client_sock, fps, garbage_bytes, stop_event)
            finally:
                client_sock.close()

    finally:
        server_sock.close()


def main():
    parser = argparse.ArgumentParser(description="Mock device TCP streamer")
    parser.add_argument("--host", default=ServerConfig.HOST)
    parser.add_argument("--port", type=int, default=ServerConfig.PORT)
    parser.add_argument("--fps", type=float, default=ServerConfig.FPS)
    parser.add_argument(
        "--garbage",
        type=int,
        default=ServerConfig.GARBAGE_BYTES,
        help="Random bytes injected before every frame",
    )
    args = parser.parse_args()
    if args.fps <= 0:
        parser.error("--fps must be positive")

    print("=" * 70)
    print("MOCK DEVICE STREAMER SERVICE")
    print("=" * 70)
    print(f"  Endpoint: {args.host}:{args.port}")
    print(f"  Video: {args.fps:.1f} FPS raw RGB565 320x240")
    print(f"  Telemetry: {ServerConfig.TELEMETRY_RATE:.1f} Hz")
    print(f"  Garbage: {args.garbage} bytes/frame")
    print("=" * 70)

    stop_event = threading.Event()
    try:
        serve(args.host, args.port, args.fps, args.garbage, stop_event)
    except KeyboardInterrupt:
        print("\n[DEVICE] Interrupted by user, shutting down...")
        stop_event.set()


if __name__ == "__main__":
    main()
