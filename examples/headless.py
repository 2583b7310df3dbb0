"""Run a CHIP-8 program without a window and print the final screen."""

import sys
import time

from chipvm import Interpreter, display_to_text

if __name__ == "__main__":
    rom_path = sys.argv[1]
    frames = int(sys.argv[2]) if len(sys.argv) > 2 else 120
    ipf = 10  # 10 instructions per 60 Hz frame ~ 600 Hz

    vm = Interpreter(log_level="INFO")
    vm.load_image(rom_path)

    beeps = 0
    start = time.time()
    for _ in range(frames):
        for _ in range(ipf):
            vm.step()
        vm.decrement_timers()
        beeps += vm.consume_sound_request()
    elapsed = time.time() - start

    print(display_to_text(vm.display))
    print(f"{vm.cycles} cycles in {elapsed:.2f}s, {beeps} tone requests")
