# helpers/logger.py
import csv, json, datetime, pathlib
import matplotlib.pyplot as plt


class RunLogger:
    def __init__(self, root="runs", tag="run"):
        ts = datetime.datetime.now().strftime("%Y%m%d-%H%M%S")
        self.root = pathlib.Path(root)
        self.dir = self.root / f"{tag}_{ts}"
        self.dir.mkdir(parents=True, exist_ok=True)
        self.csv_path = self.dir / "history.csv"
        self.json_path = self.dir / "history.json"
        self.metrics = []  # list of dicts per epoch
        self._csv_header_written = False

    # ---------- logging ----------
    def log_epoch(self, epoch, **kwargs):
        row = {"epoch": int(epoch), **{k: float(v) for k, v in kwargs.items()}}
        self.metrics.append(row)
        with open(self.csv_path, "a", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=list(row.keys()))
            if not self._csv_header_written:
                writer.writeheader()
                self._csv_header_written = True
            writer.writerow(row)

    def save_json(self):
        with open(self.json_path, "w") as f:
            json.dump(self.metrics, f, indent=2)
        return str(self.json_path)

    def save_summary(self, layers, tag="run", filename="layers.txt"):
        """
        Writes the shape and contents of every layer's weight and bias
        using the matrix text dump. Debugging aid, not a checkpoint format.
        """
        lines = [f"# {tag}"]
        for i, layer in enumerate(layers):
            lines.append(f"[layer {i}] weight")
            lines.append(layer.weight.dump())
            lines.append(f"[layer {i}] bias")
            lines.append(layer.bias.dump())
        output_path = self.dir / filename
        with open(output_path, "w") as f:
            f.write("\n".join(lines) + "\n")
        return str(output_path)

    # ---------- plotting ----------
    def _plots_dir(self, subdir):
        out = self.dir / subdir
        out.mkdir(parents=True, exist_ok=True)
        return out

    def plot_loss(self, history, tag="run", subdir="plots", total_epochs=None):
        """
        Saves loss curve as loss_curve_<tag>_epochs_<n>.png.
        Accepts history with a 'loss' key and an optional 'acc' key.
        """
        train = history.get("loss", [])

        outdir = self._plots_dir(subdir)
        plt.figure()
        if len(train) > 0:
            plt.plot(train, label="train loss")
        plt.xlabel("Epoch")
        plt.ylabel("Squared Error Loss")
        if total_epochs is None:
            total_epochs = len(train)
        plt.title(f"Loss vs Epochs ({tag})")
        if len(train) > 0:
            plt.legend()
        plt.tight_layout()
        path = outdir / f"loss_curve_{tag}_epochs_{total_epochs}.png"
        plt.savefig(path, dpi=160)
        plt.close()
        return str(path)

    def plot_accuracy(self, history, tag="run", subdir="plots", total_epochs=None):
        acc = history.get("acc", [])
        if len(acc) == 0:
            return None
        outdir = self._plots_dir(subdir)
        plt.figure()
        plt.plot(acc, label="train accuracy")
        plt.xlabel("Epoch")
        plt.ylabel("Accuracy")
        if total_epochs is None:
            total_epochs = len(acc)
        plt.title(f"Accuracy vs Epochs ({tag})")
        plt.legend()
        plt.tight_layout()
        path = outdir / f"accuracy_{tag}_epochs_{total_epochs}.png"
        plt.savefig(path, dpi=160)
        plt.close()
        return str(path)

    def plot_all(self, history, tag="run", subdir="plots"):
        """
        Convenience: generate all standard plots we know how to draw.
        """
        total_epochs = len(history.get("loss", []))
        self.plot_loss(history, tag=tag, subdir=subdir, total_epochs=total_epochs)
        self.plot_accuracy(history, tag=tag, subdir=subdir, total_epochs=total_epochs)
